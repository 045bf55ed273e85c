"""Constants and defaults for the match tracker."""

# Name matching
MATCH_THRESHOLD = 0.7
EXACT_SIMILARITY = 1.0
SUBSTRING_SIMILARITY = 0.8

# Handicap range and scaling (handicap = round(kda * HANDICAP_SCALE))
HANDICAP_MIN = 1
HANDICAP_MAX = 10
HANDICAP_SCALE = 2

# Team balancing repair loop
REPAIR_TOLERANCE = 1
MAX_REPAIR_ITERATIONS = 100

# Shuffle key offsets a player's sort weight by up to this much (exclusive),
# so players one handicap point apart can trade places but two apart cannot
SHUFFLE_SPREAD = 2.0

# Extraction payload keys
SCORES_KEY = 'scores'
GAME_MODE_KEY = 'gameMode'
WINNING_TEAM_KEY = 'winningTeam'
METADATA_KEYS = {GAME_MODE_KEY, WINNING_TEAM_KEY}

# Per-player numeric fields the extraction model may report
STAT_FIELDS = ('kills', 'deaths', 'assists', 'score')

# Free-for-all mode: winners are decided by kills, not by team
DEFAULT_GAME_MODE = 'Slayer'
FREE_FOR_ALL_MODES = {'Slayer'}

# Sanity limit for a single game's stat line
MAX_REASONABLE_STAT = 100
