import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field

import numpy as np

from .errors import DimensionMismatch
from .reconstruct import compress, policy_from_method
from .svd import decompose

logger = logging.getLogger(__name__)

GRAYSCALE = "grayscale"
RGB = "rgb"

CHANNELS = {
    GRAYSCALE: ("gray",),
    RGB: ("r", "g", "b"),
}


# === Прогресс ===

class Progress:
    """Контрольные точки прогресса (0..100, подпись).

    На вычисления не влияет: подписчики вызываются синхронно,
    а текущее состояние можно опросить через percent/message/history.
    """

    def __init__(self, callback=None):
        self.percent = 0
        self.message = ""
        self.history = []
        self._subscribers = []
        if callback is not None:
            self.subscribe(callback)

    def subscribe(self, callback):
        self._subscribers.append(callback)

    def report(self, percent, message):
        self.percent = int(percent)
        self.message = message
        self.history.append((self.percent, message))
        for callback in self._subscribers:
            callback(self.percent, message)


# === Пиксельный буфер ===

def to_pixel_buffer(img):
    """Изображение (HxW, HxWx3, HxWx4) -> uint8 RGBA HxWx4, альфа = 255"""
    img = np.asarray(img)
    if img.ndim == 2:
        img = np.stack([img] * 3, axis=2)
    if img.ndim != 3 or img.shape[2] not in (3, 4):
        raise ValueError(f"Неподдерживаемая форма изображения: {img.shape}")
    if img.dtype != np.uint8:
        img = np.clip(img, 0, 255).astype(np.uint8)

    height, width = img.shape[:2]
    pixels = np.full((height, width, 4), 255, dtype=np.uint8)
    pixels[:, :, :3] = img[:, :, :3]
    return pixels


def _check_pixels(pixels):
    pixels = np.asarray(pixels)
    if pixels.ndim != 3 or pixels.shape[2] != 4:
        raise DimensionMismatch(f"Ожидался буфер HxWx4, получено {pixels.shape}")
    if pixels.shape[0] == 0 or pixels.shape[1] == 0:
        raise DimensionMismatch("Пустое изображение")
    return pixels


def detect_image_type(pixels):
    """Ч/б, если R == G == B во всех пикселях"""
    pixels = _check_pixels(pixels)
    if np.array_equal(pixels[:, :, 0], pixels[:, :, 1]) and np.array_equal(pixels[:, :, 1], pixels[:, :, 2]):
        return GRAYSCALE
    return RGB


def split_channels(pixels, image_type):
    if image_type == GRAYSCALE:
        return {"gray": pixels[:, :, 0].astype(float)}
    return {name: pixels[:, :, i].astype(float) for i, name in enumerate(CHANNELS[RGB])}


def merge_channels(channels, image_type):
    first = next(iter(channels.values()))
    height, width = first.shape
    pixels = np.full((height, width, 4), 255, dtype=np.uint8)
    if image_type == GRAYSCALE:
        gray = np.clip(channels["gray"], 0, 255).astype(np.uint8)
        for i in range(3):
            pixels[:, :, i] = gray
    else:
        for i, name in enumerate(CHANNELS[RGB]):
            pixels[:, :, i] = np.clip(channels[name], 0, 255).astype(np.uint8)
    return pixels


# === Метрики ===

def calculate_mse(original, compressed):
    """Среднеквадратичная ошибка по каналам R, G, B (альфа не учитывается)"""
    original = np.asarray(original)
    compressed = np.asarray(compressed)
    if original.shape != compressed.shape:
        raise DimensionMismatch(f"Размеры изображений не совпадают: {original.shape} и {compressed.shape}")
    diff = original[..., :3].astype(float) - compressed[..., :3].astype(float)
    return float(np.mean(diff ** 2))


def data_compression_ratio(rows, cols, used):
    """Плотная матрица против k векторов длины rows, k длины cols и k чисел"""
    return round((rows * cols) / (used * (rows + cols + 1)), 2)


def _round_half_up(x):
    return int(np.floor(x + 0.5))


# === Сжатие ===

@dataclass
class CompressionResult:
    pixels: np.ndarray
    retained_singular_values: int
    total_singular_values: int
    compression_ratio: float
    mse: float
    image_type: str
    method: str
    channel_matrices: dict = field(default_factory=dict)
    svd_results: dict = field(default_factory=dict)
    used_per_channel: dict = field(default_factory=dict)


def _compress_channel(matrix, policy, config, random_source):
    svd = decompose(matrix, config=config, random_source=random_source)
    channel, used = compress(svd, policy)
    return svd, channel, used


def compress_image(pixels, ratio, method="count", progress=None, config=None, seed=None,
                   image_type=None, max_workers=None):
    """Сжатие RGBA-буфера через SVD каждого канала.

    ratio: процент (0..100) сохраняемых сингулярных чисел (method='count')
    или их суммы (method='sum'). Каналы обрабатываются параллельно,
    у каждого свой поток случайных чисел, порождённый от seed.
    """
    pixels = _check_pixels(pixels)
    if not 0 <= ratio <= 100:
        raise ValueError(f"Процент сохранения должен быть в [0, 100], получено {ratio}")
    policy = policy_from_method(method, ratio / 100)

    if progress is None:
        progress = Progress()
    elif callable(progress) and not isinstance(progress, Progress):
        progress = Progress(progress)

    progress.report(0, "Начало сжатия")
    start = time.perf_counter()

    if image_type is None:
        image_type = detect_image_type(pixels)
    if image_type not in CHANNELS:
        raise ValueError(f"Неизвестный тип изображения: {image_type!r}")

    progress.report(10, "Анализ изображения")
    matrices = split_channels(pixels, image_type)
    names = list(matrices)
    height, width = pixels.shape[:2]
    logger.info("Сжатие %dx%d (%s, %s, %s%%)", width, height, image_type, method, ratio)

    seeds = np.random.SeedSequence(seed).spawn(len(names))
    results = {}
    with ThreadPoolExecutor(max_workers=max_workers or len(names)) as executor:
        futures = {
            executor.submit(
                _compress_channel, matrices[name], policy, config, np.random.default_rng(child)
            ): name
            for name, child in zip(names, seeds)
        }
        for done, future in enumerate(as_completed(futures), start=1):
            name = futures[future]
            results[name] = future.result()
            progress.report(20 + (done - 1) * 60 // len(names), f"Обработан канал {name.upper()}")

    progress.report(80, "Восстановление изображения")
    channel_matrices = {name: results[name][1] for name in names}
    compressed = merge_channels(channel_matrices, image_type)

    used = {name: results[name][2] for name in names}
    totals = [len(results[name][0].sigma) for name in names]
    retained = max(1, _round_half_up(np.mean(list(used.values()))))
    total = _round_half_up(np.mean(totals))

    result = CompressionResult(
        pixels=compressed,
        retained_singular_values=retained,
        total_singular_values=total,
        compression_ratio=data_compression_ratio(height, width, retained),
        mse=calculate_mse(pixels, compressed),
        image_type=image_type,
        method=method,
        channel_matrices={name: m.astype(np.uint8) for name, m in channel_matrices.items()},
        svd_results={name: results[name][0] for name in names},
        used_per_channel=used,
    )

    progress.report(100, "Сжатие завершено")
    logger.info(
        "Готово за %.2f с: %d / %d сингулярных чисел, сжатие данных %.2f, MSE %.2f",
        time.perf_counter() - start, retained, total, result.compression_ratio, result.mse,
    )
    return result
