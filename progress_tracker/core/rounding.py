"""Politique d'arrondi des agrégats.

Toutes les moyennes affichées passent par `round_half_away_from_zero` :
`round()` de Python arrondit au pair (2.5 -> 2), ce qui ne correspond pas
à l'arrondi attendu dans les tableaux et graphiques (2.5 -> 3).
"""


def round_half_away_from_zero(total, count) -> int:
    """
    Arrondit total / count à l'entier le plus proche, .5 loin de zéro.

    Args:
        total: Somme des valeurs
        count: Nombre de valeurs

    Returns:
        Moyenne arrondie, 0 si count vaut 0
    """
    if not count:
        return 0
    negative = (total < 0) != (count < 0)
    num, den = abs(total), abs(count)
    value = int((2 * num + den) // (2 * den))
    return -value if negative else value
