import io

import pytest
from PIL import Image

from agri_assist.infrastructure.imaging import TARGET_SIZE, prepare_image


@pytest.fixture
def leaf_png(tmp_path):
    path = tmp_path / "leaf.png"
    Image.new("RGBA", (640, 480), (30, 140, 60, 255)).save(path)
    return str(path)


def test_prepare_image_outputs_224_jpeg(leaf_png):
    data = prepare_image(leaf_png)

    with Image.open(io.BytesIO(data)) as image:
        assert image.format == "JPEG"
        assert image.size == TARGET_SIZE
        assert image.mode == "RGB"


def test_prepare_image_rejects_non_images(tmp_path):
    path = tmp_path / "notes.jpg"
    path.write_text("not an image")

    with pytest.raises(OSError):
        prepare_image(str(path))
