"""Rupee amounts in words, Indian numbering (Crore / Lakh / Thousand / Hundred)."""

ONES = [
    "", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine",
    "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen", "Sixteen",
    "Seventeen", "Eighteen", "Nineteen",
]
TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]

SCALES = (
    (10_000_000, "Crore"),
    (100_000,    "Lakh"),
    (1_000,      "Thousand"),
)


def _below_thousand(n: int) -> list:
    words = []
    if n >= 100:
        words += [ONES[n // 100], "Hundred"]
        n %= 100
    if n >= 20:
        words.append(TENS[n // 10])
        n %= 10
    if n:
        words.append(ONES[n])
    return words


def _group(n: int) -> list:
    # Crore counts can exceed 999 and recurse through the same scales
    if n >= 1000:
        return amount_in_words(n).split()
    return _below_thousand(n)


def amount_in_words(amount) -> str:
    """Integer part only: 1234567 → "Twelve Lakh Thirty Four Thousand Five Hundred Sixty Seven"."""
    number = int(amount or 0)
    if number <= 0:
        return "Zero"

    words = []
    for size, label in SCALES:
        if number >= size:
            words += _group(number // size) + [label]
            number %= size
    words += _below_thousand(number)
    return " ".join(words)


def rupees_in_words(amount) -> str:
    return f"Rupees {amount_in_words(amount)} Only"
