# nilhub/services/upload_service.py
import logging
import re

from fastapi import Request
from starlette.datastructures import UploadFile

from nilhub.core.config import get_settings
from nilhub.core.errors import (
    LIMIT_FILE_COUNT,
    LIMIT_FILE_SIZE,
    LIMIT_UNEXPECTED_FILE,
    UploadLimitError,
    UploadRejected,
    ValidationFailed,
)
from nilhub.core.storage_utils import (
    delete_from_storage,
    generate_asset_path,
    upload_to_storage,
)
from nilhub.schemas.upload import UploadedImage

logger = logging.getLogger(__name__)

DEFAULT_FOLDER = "nilhub/products"

# --- Image config ---

KNOWN_IMAGE_EXTENSIONS: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
    "image/avif": "avif",
}

# Vector formats can carry script when served from a public bucket
BLOCKED_IMAGE_TYPES = {"image/svg+xml"}

_FOLDER_PATTERN = re.compile(r"^[A-Za-z0-9_\-/]+$")


class UploadService:
    """
    Image uploads to Supabase Storage.

    Responsibilities:
      - multipart field / count / size limits
      - images only
      - asset path generation (the path is the asset id)
    """

    def __init__(self, max_bytes: int | None = None, max_files: int | None = None):
        settings = get_settings()
        self.max_bytes = max_bytes or settings.MAX_UPLOAD_BYTES
        self.max_files = max_files or settings.MAX_UPLOAD_FILES

    # ----- Helpers -----

    @staticmethod
    def _ext_for(content_type: str) -> str:
        if content_type in KNOWN_IMAGE_EXTENSIONS:
            return KNOWN_IMAGE_EXTENSIONS[content_type]
        subtype = content_type.split("/", 1)[1]
        return re.sub(r"[^a-z0-9]", "", subtype.lower()) or "img"

    @staticmethod
    def clean_folder(folder: str | None) -> str:
        folder = (folder or "").strip().strip("/")
        if not folder:
            return DEFAULT_FOLDER
        if ".." in folder or not _FOLDER_PATTERN.match(folder):
            raise ValidationFailed("Invalid folder name")
        return folder

    async def collect_files(
        self,
        request: Request,
        field: str,
        max_files: int,
    ) -> list[UploadFile]:
        """
        Read the multipart body and return the files sent under `field`.

        Raises:
            UploadLimitError: file under another field, or too many files.
        """
        form = await request.form()
        files: list[UploadFile] = []
        for name, value in form.multi_items():
            if not isinstance(value, UploadFile):
                continue
            if name != field:
                raise UploadLimitError(LIMIT_UNEXPECTED_FILE, field=name)
            files.append(value)

        if len(files) > max_files:
            raise UploadLimitError(LIMIT_FILE_COUNT, field=field, limit=max_files)
        return files

    async def _read_image(self, file: UploadFile) -> tuple[bytes, str]:
        content_type = (file.content_type or "").lower()
        if not content_type.startswith("image/"):
            raise UploadRejected("Only images are allowed")
        if content_type in BLOCKED_IMAGE_TYPES:
            raise UploadRejected("SVG images are not allowed")

        if file.size is not None and file.size > self.max_bytes:
            raise UploadLimitError(LIMIT_FILE_SIZE, field=file.filename, limit=self.max_bytes)

        # One byte past the limit is enough to tell an oversized file
        data = await file.read(self.max_bytes + 1)
        if len(data) > self.max_bytes:
            raise UploadLimitError(LIMIT_FILE_SIZE, field=file.filename, limit=self.max_bytes)
        return data, content_type

    # ----- Operations -----

    async def upload_one(self, file: UploadFile, folder: str) -> UploadedImage:
        data, content_type = await self._read_image(file)
        path = generate_asset_path(folder, self._ext_for(content_type))
        url = upload_to_storage(path, data, content_type)
        return UploadedImage(url=url, asset_id=path, content_type=content_type, size=len(data))

    async def upload_single(self, request: Request, folder: str | None) -> UploadedImage:
        files = await self.collect_files(request, field="image", max_files=1)
        if not files:
            raise UploadRejected("No image provided")
        return await self.upload_one(files[0], self.clean_folder(folder))

    async def upload_many(self, request: Request, folder: str | None) -> list[UploadedImage]:
        files = await self.collect_files(request, field="images", max_files=self.max_files)
        if not files:
            raise UploadRejected("No images provided")

        folder = self.clean_folder(folder)
        # Validate everything before the first upload
        payloads = [await self._read_image(f) for f in files]

        results: list[UploadedImage] = []
        for data, content_type in payloads:
            path = generate_asset_path(folder, self._ext_for(content_type))
            url = upload_to_storage(path, data, content_type)
            results.append(
                UploadedImage(url=url, asset_id=path, content_type=content_type, size=len(data))
            )

        logger.info("%s images uploaded to %s", len(results), folder)
        return results

    def delete(self, asset_id: str) -> None:
        asset_id = asset_id.strip().strip("/")
        if not asset_id:
            raise ValidationFailed("Asset id not provided")
        delete_from_storage(asset_id)
