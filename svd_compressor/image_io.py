import logging
import os

import numpy as np
from PIL import Image
from skimage import io
from skimage.util import img_as_ubyte

from .config import DEFAULT_MAX_SIZE
from .pipeline import to_pixel_buffer

logger = logging.getLogger(__name__)


def load_image(path, max_size=DEFAULT_MAX_SIZE):
    """Загружает изображение как RGBA-буфер, уменьшая большие до max_size по стороне"""
    img = io.imread(path)
    if img.dtype != np.uint8:
        img = img_as_ubyte(img)

    if max_size and max(img.shape[:2]) > max_size:
        height, width = img.shape[:2]
        preview = Image.fromarray(img)
        preview.thumbnail((max_size, max_size))
        img = np.asarray(preview)
        logger.info("Изображение уменьшено с %dx%d до %dx%d", width, height, img.shape[1], img.shape[0])

    return to_pixel_buffer(img)


def save_image(path, pixels):
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    io.imsave(path, np.asarray(pixels, dtype=np.uint8), check_contrast=False)
    return path
