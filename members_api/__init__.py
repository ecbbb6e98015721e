"""
Members API

REST backend for member records stored in MongoDB, with photo
uploads to Cloudinary and a keep-alive self ping.
"""

__version__ = "1.0.0"
