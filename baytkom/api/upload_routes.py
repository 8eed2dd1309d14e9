import logging
import os

from fastapi import APIRouter, Depends, File, UploadFile

from baytkom.auth.dependencies import get_current_user
from baytkom.core.constants import UPLOAD_DIR, UPLOAD_URL_PREFIX
from baytkom.models.user import User
from baytkom.utils.security import generate_safe_filename, validate_and_read_image

log = logging.getLogger(__name__)

router = APIRouter()


@router.post("/upload")
async def upload_image(
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
):
    """Store an image (receipt, product, meal, avatar) and return its public URL."""
    contents = await validate_and_read_image(file)
    filename = generate_safe_filename(file.filename, file.content_type)

    with open(os.path.join(UPLOAD_DIR, filename), "wb") as f:
        f.write(contents)

    log.info("upload %s (%d bytes) by %s", filename, len(contents), user.id)
    return {"url": f"{UPLOAD_URL_PREFIX}/{filename}"}
