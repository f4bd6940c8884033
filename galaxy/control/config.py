from ..parameters import GalaxyParameters

DEFAULTS = dict(
    galaxy=GalaxyParameters().to_payload(),
    system=dict(frameIntervalMs=16, transparent=False),
)

# key -> (minimum, maximum, step, decimals); widget limits of the tweak panel
RANGES = {
    "count": (100, 300000, 50, 0),
    "size": (0.001, 0.1, 0.001, 3),
    "radius": (0.01, 20.0, 0.01, 2),
    "branches": (2, 20, 1, 0),
    "spin": (-5.0, 5.0, 0.001, 3),
    "randomness": (0.0, 2.0, 0.001, 3),
    "randomnessPower": (1.0, 10.0, 0.001, 3),
    "animationSpeed": (0.0, 2.0, 0.01, 2),
    "motionRadius": (0.0, 0.5, 0.01, 2),
}

LABELS = {
    "animationSpeed": "Vitesse d’animation",
    "motionRadius": "Amplitude du mouvement",
    "count": "Nombre de particules",
    "size": "Taille des particules",
    "radius": "Rayon des branches",
    "branches": "Nombre de branches",
    "spin": "Angle de torsion",
    "randomness": "Dispersion",
    "randomnessPower": "Concentration de la dispersion",
    "innerColor": "Couleur intérieure",
    "outerColor": "Couleur extérieure",
}

TOOLTIPS = {
    "galaxy.animationSpeed":"Vitesse à laquelle les particules dérivent autour de leur position.",
    "galaxy.motionRadius":"Distance maximale parcourue par chaque particule pendant sa dérive.",
    "galaxy.count":"Nombre total de points générés pour la galaxie.",
    "galaxy.size":"Taille apparente de chaque particule.",
    "galaxy.radius":"Étendue maximale des branches depuis le centre.",
    "galaxy.branches":"Nombre de bras spiraux répartis régulièrement autour du centre.",
    "galaxy.spin":"Torsion des bras : angle ajouté par unité de distance au centre.",
    "galaxy.randomness":"Amplitude du déplacement aléatoire appliqué à chaque point.",
    "galaxy.randomnessPower":"Plus la valeur est grande, plus les points restent proches de leur bras.",
    "galaxy.innerColor":"Couleur des points proches du centre.",
    "galaxy.outerColor":"Couleur des points en bout de branche.",
}
