"""
Amounts in words, Indian numbering (Thousand, Lakh, Crore).

    1,23,45,678 -> "One Crore Twenty Three Lakh Forty Five Thousand Six Hundred Seventy Eight"

num2words' en_IN output ("one crore, twenty-three lakh, ... six hundred
and seventy-eight") is normalised to the form written on bills.
"""

from num2words import num2words


def _normalise(text: str) -> str:
    words = text.replace(",", " ").replace("-", " ").split()
    return " ".join(w.capitalize() for w in words if w.lower() != "and")


def amount_in_words(amount) -> str:
    """Whole-rupee part of an amount in words. Fractions are dropped."""
    number = int(amount)
    if number < 0:
        return f"Minus {amount_in_words(-number)}"
    return _normalise(num2words(number, lang="en_IN"))


def rupees_in_words(amount) -> str:
    """'Rupees ... Only', as written on bills and estimates."""
    return f"Rupees {amount_in_words(amount)} Only"
