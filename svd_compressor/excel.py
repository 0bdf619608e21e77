import os

import numpy as np
from openpyxl import Workbook

# === Функции работы с матрицами и Excel ===

SWEEP_HEADER = ["ratio_percent", "retained", "total", "compression_ratio", "mse"]


def save_matrix_to_excel(matrices, filename):
    """Сохраняет словарь {имя: матрица} в Excel файл, по листу на матрицу"""
    wb = Workbook()
    for name, matrix in matrices.items():
        ws = wb.create_sheet(title=name[:31])  # в Excel имя листа не длиннее 31 символа
        matrix = np.atleast_2d(matrix)
        for row in matrix:
            ws.append([float(x) for x in row])
    # Удаляем дефолтный лист
    if "Sheet" in wb.sheetnames:
        wb.remove(wb["Sheet"])
    wb.save(filename)


def svd_matrices(svd, used, suffix=""):
    """Полные и усечённые U, S, Vt одного канала"""
    return {
        f"U_full{suffix}": svd.U,
        f"S_full{suffix}": np.diag(svd.sigma),
        f"Vt_full{suffix}": svd.V_T,
        f"U_k={used}{suffix}": svd.U[:, :used],
        f"S_k={used}{suffix}": np.diag(svd.sigma[:used]),
        f"Vt_k={used}{suffix}": svd.V_T[:used, :],
    }


def save_channel_matrices(result, save_dir, basename):
    """По Excel-файлу на канал; возвращает список путей"""
    paths = []
    for i, (name, svd) in enumerate(result.svd_results.items(), start=1):
        used = result.used_per_channel[name]
        excel_path = os.path.join(save_dir, f"{basename}_channel{i}_matrices.xlsx")
        save_matrix_to_excel(svd_matrices(svd, used, suffix=f"_ch{i}"), excel_path)
        paths.append(excel_path)
    return paths


def save_sweep_table(rows, filename):
    """Таблица прогона по процентам: ratio, retained, total, сжатие, MSE"""
    wb = Workbook()
    ws = wb.active
    ws.title = "sweep"
    ws.append(SWEEP_HEADER)
    for row in rows:
        ws.append([row[key] for key in SWEEP_HEADER])
    wb.save(filename)
