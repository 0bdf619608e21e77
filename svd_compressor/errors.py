class SVDCompressorError(Exception):
    """Базовая ошибка пакета"""


class DimensionMismatch(SVDCompressorError, ValueError):
    """Размеры матриц/векторов не согласованы (или матрица пустая/рваная)"""


class ConvergenceShortfall(UserWarning):
    """Собственная пара не сошлась за отведённое число итераций.

    Выдаётся через warnings.warn, не исключение: решатель возвращает
    частичный результат (меньше собственных пар, чем запрошено).
    """


class DegenerateComponent(UserWarning):
    """Сингулярный вектор ниже порога, компонента заменяется нулями"""
