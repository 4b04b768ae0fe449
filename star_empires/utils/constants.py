"""Game configuration constants."""

# Map sizes: planet count and world dimensions
MAP_SIZES = {
    "compact": {"planets": 12, "width": 1500, "height": 1200},
    "standard": {"planets": 20, "width": 2500, "height": 2000},
    "vast": {"planets": 30, "width": 4000, "height": 3200},
}
DEFAULT_MAP_SIZE = "compact"

# Map layout
MAP_PADDING = 150
MIN_PLANET_SPACING = 200
PLACEMENT_ATTEMPTS = 100
PLANET_SIZE_RANGE = (20, 45)
YIELD_RANGE = (5, 14)  # Per resource, inclusive
MAX_POPULATION_PER_SIZE = 4
HOME_POPULATION = 50

PLANET_NAMES = [
    "Alpha", "Beta", "Gamma", "Delta", "Epsilon", "Zeta", "Eta", "Theta", "Iota", "Kappa",
    "Lambda", "Mu", "Nu", "Xi", "Omicron", "Pi", "Rho", "Sigma", "Tau", "Upsilon",
    "Phi", "Chi", "Psi", "Omega", "Nova", "Nebula", "Pulsar", "Quasar", "Vega", "Rigel",
]  # fmt: skip

# Economy
STARTING_STOCKPILE = 100  # Energy, minerals and food each
BUILD_REFUND_RATE = 0.5
POPULATION_BUILD_DIVISOR = 200  # Population at which build time bottoms out
MIN_POPULATION_BUILD_FACTOR = 0.5
FOOD_PER_GROWTH = 5

# Colonization and conquest
COLONY_POPULATION = 10
CONQUEST_TURNS = 3
CONQUEST_POPULATION_RETAINED = 0.3

# Combat
MAX_COMBAT_ROUNDS = 50
COMBAT_VARIANCE = (0.85, 1.15)
DEFENSE_HP_BONUS = 0.10
WITHDRAW_DAMAGE_RANGE = (0.30, 0.40)

# Maintenance
HEAL_RATE = 0.2  # Fraction of max hit points per turn

# Movement
DISTANCE_PER_SPEED = 100  # World units travelled per turn at speed 1.0

# AI
ATTACK_MEMORY_TURNS = 3
MILITARY_THREAT_RATIO = 0.7
ATTACK_COMMIT_MARGIN = 1.2
COLONIZATION_DISTANCE_DIVISOR = 100  # World units of distance worth one point of yield

# Scoring
SCORE_PER_PLANET = 100
SCORE_PER_SHIP = 10
SCORE_PER_KILL = 20

# Testing
RNG_SEED_DEFAULT = 42
