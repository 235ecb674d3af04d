from decimal import Decimal, ROUND_HALF_UP

ONE_DECIMAL = Decimal("0.1")


def average_rating(total: int, count: int) -> float:
    """Среднее арифметическое оценок, округлённое до 0.1 (half away from zero).

    Считаем в Decimal, чтобы 4.25 не превратилось в 4.2 из-за двоичного float.
    """
    if count <= 0:
        return 0.0
    mean = Decimal(total) / Decimal(count)
    return float(mean.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP))


def percent(done: int, total: int) -> int:
    if total <= 0:
        return 0
    value = (Decimal(done) * 100 / Decimal(total)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return min(int(value), 100)
