"""
Services module for entity assets.

Available Services:
- AssetRepository: Filesystem access rooted at the storage directory
- ImageUploadService: Main and gallery image ingestion
- FileUploadService: Document ingestion
- AssetDeletionService: Asset and entity folder deletion
- GalleryRenumberer: Journaled gallery index compaction
- ImageService / FileService: Read-only listings

Subdirectory Services:
- image_pipeline: Pillow transform engine and derivative generation
- logger: loguru-backed service loggers

Services are imported from their modules; utils import the logger from
here, so this package does not import its modules eagerly.
"""
