"""Game configuration constants for Burn Rate."""

# Sides
PLAYER = "player"
AI = "ai"
SIDES = (PLAYER, AI)

# Attack targets (each side's home system)
PLAYER_HOME = "player_home"
AI_HOME = "ai_system"
HOME_TARGETS = {PLAYER: PLAYER_HOME, AI: AI_HOME}

# Starting state
STARTING_TURN = 1
STARTING_METAL = 10000
STARTING_ENERGY = 10000
STARTING_FLEET = (50, 20, 10)  # frigates, cruisers, battleships

# Economy
BASE_METAL_INCOME = 10000
BASE_ENERGY_INCOME = 10000
STRUCTURE_INCOME_BONUS = 500  # Per reactor (energy) or mine (metal)
STRUCTURE_COST_SCALING = 0.5  # Each existing structure adds 50% to the base cost
STRUCTURE_COST_EXPONENT = 1.2
CONSTRUCTION_DRAIN_MULTIPLIER = 2  # Units under construction pay double upkeep
LOW_INCOME_WARNING = 1000
CONSTRUCTION_DRAIN_WARNING_RATIO = 0.8
UPKEEP_WARNING_RATIO = 0.7
STRUCTURE_VIABILITY_TURNS = 15  # Payback beyond this draws a warning
HOARDING_STOCK_THRESHOLD = 50000
HOARDING_INCOME_THRESHOLD = 2000
MAX_BUILD_QUANTITY = 10000

# Unit stats: (build_time, (cost_metal, cost_energy), (upkeep_metal, upkeep_energy))
UNIT_STATS = {
    "frigate": (1, (4, 2), (2, 1)),
    "cruiser": (2, (10, 6), (5, 3)),
    "battleship": (4, (20, 12), (10, 6)),
}

# Structure stats: (build_time, (cost_metal, cost_energy), (metal_bonus, energy_bonus))
STRUCTURE_STATS = {
    "reactor": (1, (900, 1200), (0, STRUCTURE_INCOME_BONUS)),
    "mine": (1, (1500, 600), (STRUCTURE_INCOME_BONUS, 0)),
}

# Missions (turn offsets from the commit turn)
MISSION_ARRIVAL_OFFSET = 1
MISSION_RETURN_OFFSET = 3

# Combat
RANDOM_FACTOR_RANGE = (0.8, 1.2)
DECISIVE_RATIO = 2.0
CLOSE_BATTLE_CASUALTY_RANGE = (0.4, 0.6)
DECISIVE_WINNER_CASUALTY_RANGE = (0.1, 0.3)
DECISIVE_LOSER_CASUALTY_RANGE = (0.7, 0.9)
SALVAGE_REFUND_TURNS = 1  # Turns of upkeep refunded per destroyed ship

# Victory
ECONOMIC_COLLAPSE_TURNS = 1
MUTUAL_ELIMINATION_POLICIES = ("defender", "draw")
DEFAULT_MUTUAL_ELIMINATION_POLICY = "defender"

# Game phase thresholds (last turn of each phase)
EARLY_GAME_END = 5
MID_GAME_END = 15
LATE_GAME_END = 25

# Intelligence
SCAN_COSTS = {"basic": 1000, "deep": 2500, "advanced": 4000}
SCAN_ACCURACY = {"basic": 0.7, "deep": 0.9, "advanced": 0.95}
BASIC_SCAN_VARIANCE = 0.3
DEEP_SCAN_VARIANCE = 0.1
MISINFORMATION_VARIANCE = 0.5
STARTING_SCAN_ACCURACY = 0.7
STARTING_MISINFORMATION_CHANCE = 0.2
CONFIDENCE_DECAY_RATE = 0.1
MIN_CONFIDENCE = 0.1
SCAN_HISTORY_LIMIT = 10
FLEET_SIZE_SMALL = 100
FLEET_SIZE_MEDIUM = 500

# AI
AI_ARCHETYPES = ("aggressor", "economist", "trickster", "hybrid")
DEFAULT_AI_ARCHETYPE = "hybrid"
UNIT_STRENGTH_WEIGHTS = {"frigate": 1.0, "cruiser": 2.5, "battleship": 5.0}
