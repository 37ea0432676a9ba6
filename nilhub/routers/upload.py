# nilhub/routers/upload.py
from fastapi import APIRouter, Depends, Request

from nilhub.core.auth import protect
from nilhub.schemas.common import ApiResponse, MessageResponse
from nilhub.schemas.upload import UploadedImage
from nilhub.services.upload_service import DEFAULT_FOLDER, UploadService

router = APIRouter(
    prefix="/upload",
    tags=["Upload"],
    dependencies=[Depends(protect)],
)

service = UploadService()


@router.post("/image", response_model=ApiResponse[UploadedImage])
async def upload_image(request: Request, folder: str = DEFAULT_FOLDER):
    """
    Upload one image (multipart field `image`).

    - Images only, 5MB max.
    - `folder` query param picks the Storage folder.
    """
    image = await service.upload_single(request, folder)
    return ApiResponse(data=image)


@router.post("/images", response_model=ApiResponse[list[UploadedImage]])
async def upload_images(request: Request, folder: str = DEFAULT_FOLDER):
    """
    Upload up to 5 images (multipart field `images`).
    """
    images = await service.upload_many(request, folder)
    return ApiResponse(data=images, count=len(images))


@router.delete("/{asset_id:path}", response_model=MessageResponse)
def delete_image(asset_id: str):
    """
    Delete an image by asset id (its Storage path, slashes included).
    """
    service.delete(asset_id)
    return MessageResponse(message="Image deleted successfully")
