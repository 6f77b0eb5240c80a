# entity_assets/services/image_pipeline/constants.py
"""
Image Pipeline Constants
"""

# EXIF tag id of "Orientation"
EXIF_ORIENTATION_TAG = 0x0112

# Transparent pixels are flattened onto this colour for JPEG output
JPEG_BACKGROUND_COLOR = (255, 255, 255)
