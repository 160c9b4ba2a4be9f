import io

from PIL import Image, ImageOps


TARGET_SIZE = (224, 224)
JPEG_QUALITY = 90


def prepare_image(path: str) -> bytes:
    """Center-crop and resize an image to the classifier's input size, as JPEG bytes."""
    with Image.open(path) as image:
        image = ImageOps.exif_transpose(image)
        fitted = ImageOps.fit(image.convert("RGB"), TARGET_SIZE)

    buffer = io.BytesIO()
    fitted.save(buffer, format="JPEG", quality=JPEG_QUALITY)
    return buffer.getvalue()
