"""
Командная строка SVD-компрессора.

Использование:
    svd-compressor compress Cat.jpg -r 20 -m count --excel
    svd-compressor sweep Cat.jpg -m sum --ratios 1,5,10,50

compress: сохраняет оригинал и сжатое изображение в папку compressed_<имя>
(и, с --excel, матрицы U, S, Vt каждого канала).
sweep: сжимает при нескольких процентах и сводит результаты в Excel-таблицу.
"""

import argparse
import logging
import os
import sys

from .config import DEFAULT_MAX_SIZE, SolverConfig
from .errors import SVDCompressorError
from .excel import save_channel_matrices, save_sweep_table
from .image_io import load_image, save_image
from .pipeline import GRAYSCALE, RGB, compress_image
from .reconstruct import METHODS

logger = logging.getLogger("svd_compressor")

# Те же значения, что и список k в первой версии: 1..10, 20..100
DEFAULT_SWEEP_RATIOS = list(range(1, 11)) + list(range(20, 101, 10))


def _ratio(value):
    ratio = float(value)
    if not 0 <= ratio <= 100:
        raise argparse.ArgumentTypeError("процент должен быть в диапазоне 0..100")
    return ratio


def _ratio_list(value):
    try:
        return [_ratio(v) for v in value.split(",") if v.strip()]
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"некорректный список процентов: {value}") from e


def build_parser():
    parser = argparse.ArgumentParser(
        prog="svd-compressor",
        description="Сжатие изображений через SVD (степенной метод с дефляцией)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Подробный лог (DEBUG)")
    sub = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("image", help="Путь к изображению (.jpg, .png, .bmp, .tif)")
    common.add_argument("-m", "--method", choices=METHODS, default="count",
                        help="count: доля числа сингулярных чисел, sum: доля их суммы")
    common.add_argument("-o", "--output", help="Папка результатов (по умолчанию compressed_<имя>)")
    common.add_argument("--seed", type=int, help="Зерно для воспроизводимых результатов")
    common.add_argument("--max-size", type=int, default=DEFAULT_MAX_SIZE,
                        help="Уменьшать изображение до этого размера по большей стороне (0: не уменьшать)")
    common.add_argument("--tolerance", type=float, help="Порог сходимости степенного метода")
    common.add_argument("--max-iterations", type=int, help="Максимум итераций на собственную пару")
    kind = common.add_mutually_exclusive_group()
    kind.add_argument("--grayscale", dest="image_type", action="store_const", const=GRAYSCALE,
                      help="Обрабатывать как ч/б")
    kind.add_argument("--rgb", dest="image_type", action="store_const", const=RGB,
                      help="Обрабатывать как цветное")

    compress_cmd = sub.add_parser("compress", parents=[common], help="Сжать одно изображение")
    compress_cmd.add_argument("-r", "--ratio", type=_ratio, default=20.0,
                              help="Процент сохраняемых сингулярных чисел (0..100)")
    compress_cmd.add_argument("--excel", action="store_true", help="Сохранить матрицы U, S, Vt в Excel")

    sweep_cmd = sub.add_parser("sweep", parents=[common], help="Сжать при нескольких процентах")
    sweep_cmd.add_argument("--ratios", type=_ratio_list, default=DEFAULT_SWEEP_RATIOS,
                           help="Проценты через запятую")
    return parser


def _solver_config(args, pixels):
    height, width = pixels.shape[:2]
    return SolverConfig.for_shape(height, width).with_overrides(
        tolerance=args.tolerance, max_iterations=args.max_iterations,
    )


def _log_progress(percent, message):
    logger.debug("[%3d%%] %s", percent, message)


def _format_ratio(ratio):
    return f"{ratio:g}"


def run_compress(args, pixels, output_dir, basename):
    original_path = save_image(os.path.join(output_dir, f"{basename}_original.png"), pixels)

    result = compress_image(
        pixels, args.ratio, method=args.method, progress=_log_progress,
        config=_solver_config(args, pixels), seed=args.seed, image_type=args.image_type,
    )
    compressed_path = save_image(
        os.path.join(output_dir, f"{basename}_compressed_r={_format_ratio(args.ratio)}.png"), result.pixels
    )

    logger.info("Оригинал сохранён: %s", original_path)
    logger.info("Сжатое изображение сохранено: %s", compressed_path)
    if args.excel:
        for path in save_channel_matrices(result, output_dir, basename):
            logger.info("Матрицы сохранены: %s", path)

    print(f"Тип изображения: {result.image_type}")
    print(f"Сингулярные числа: {result.retained_singular_values} / {result.total_singular_values}")
    print(f"Сжатие данных: {result.compression_ratio:.2f}")
    print(f"MSE: {result.mse:.2f}")
    return result


def run_sweep(args, pixels, output_dir, basename):
    config = _solver_config(args, pixels)
    rows = []
    for ratio in args.ratios:
        result = compress_image(
            pixels, ratio, method=args.method, progress=_log_progress,
            config=config, seed=args.seed, image_type=args.image_type,
        )
        save_image(
            os.path.join(output_dir, f"{basename}_compressed_r={_format_ratio(ratio)}.png"), result.pixels
        )
        rows.append({
            "ratio_percent": ratio,
            "retained": result.retained_singular_values,
            "total": result.total_singular_values,
            "compression_ratio": result.compression_ratio,
            "mse": result.mse,
        })
        print(f"{_format_ratio(ratio):>5}%  {result.retained_singular_values:>4} / "
              f"{result.total_singular_values:<4}  сжатие {result.compression_ratio:>7.2f}  MSE {result.mse:.2f}")

    table_path = os.path.join(output_dir, f"{basename}_sweep.xlsx")
    save_sweep_table(rows, table_path)
    logger.info("Таблица сохранена: %s", table_path)
    return rows


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    basename = os.path.splitext(os.path.basename(args.image))[0]
    output_dir = args.output or f"compressed_{basename}"

    try:
        pixels = load_image(args.image, max_size=args.max_size)
        os.makedirs(output_dir, exist_ok=True)
        if args.command == "compress":
            run_compress(args, pixels, output_dir, basename)
        else:
            run_sweep(args, pixels, output_dir, basename)
    except (SVDCompressorError, OSError, ValueError) as e:
        logger.error("Ошибка: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
