"""Configuration for Manga Panel Studio"""
