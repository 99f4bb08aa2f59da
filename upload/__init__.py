"""
Image upload helpers
"""
from .images import load_image, load_images, is_image_file

__all__ = ["load_image", "load_images", "is_image_file"]
