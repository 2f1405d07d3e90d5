"""Hierarchical block-matching motion estimation, compensation and PSNR for raw YUV 4:2:0 video."""

__version__ = "0.1.0"