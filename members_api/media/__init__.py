"""
Media module for photo uploads to the media host.
"""

from .uploader import MediaUploader

__all__ = ["MediaUploader"]
