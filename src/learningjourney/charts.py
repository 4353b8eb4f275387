# src/learningjourney/charts.py

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

# Farbkonstanten
COLOR_LEARNED = '#FF9230'
COLOR_FROZEN = '#0FA3A7'
COLOR_FREEZES_LEFT = '#3A3A3C'


def create_pie_chart(values: list[int], labels: list[str], filename: str, colors: list[str] = None, subtitle: str = None):
    """
    Erstellt ein Tortendiagramm und speichert es als PNG.
    :param values: Liste der Werte (z.B. [Gelernt, Freeze]).
    :param labels: Zugehörige Labels.
    :param filename: Pfad zur Ausgabedatei.
    :param colors: (Optional) Liste von Farben für die Segmente.
    :param subtitle: (Optional) Text unter dem Diagramm.
    """
    fig, ax = plt.subplots()
    # Ohne Daten nur ein Platzhalter
    if sum(values) == 0:
        ax.text(0.5, 0.5, "Keine Daten", ha="center", va="center", fontsize=14)
        ax.axis("off")
    else:
        ax.pie(values, labels=labels, autopct="%1.1f%%", colors=colors)
        ax.axis("equal")
    if subtitle:
        fig.text(0.5, 0.02, subtitle, ha="center", va="bottom", fontsize=16, fontweight='bold')
    fig.savefig(filename, bbox_inches="tight")
    plt.close(fig)
    return filename


def create_window_chart(summary: dict, filename: str, subtitle: str = None):
    """Diagramm für ein Plan-Fenster aus ``summarize_window``."""
    return create_pie_chart(
        [summary['learned'], summary['frozen'], summary['freezes_left']],
        ['Gelernt', 'Freeze', 'Freezes übrig'],
        filename,
        colors=[COLOR_LEARNED, COLOR_FROZEN, COLOR_FREEZES_LEFT],
        subtitle=subtitle,
    )
