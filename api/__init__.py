"""Gateway proxy HTTP API"""
