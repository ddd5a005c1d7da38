from .inventory_service import PHOTO_MEDIA_TYPE, InventoryService, UploadedPhoto, photo_url_for

__all__ = ["PHOTO_MEDIA_TYPE", "InventoryService", "UploadedPhoto", "photo_url_for"]
