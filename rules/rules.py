DEFAULT_TABLE = 7
DEFAULT_ROWS = 5
DEFAULT_COLS = 2

# blanks per round never drop below this
MIN_BLANKS = 1
# one extra blank for every this many points scored
BLANKS_SCORE_STEP = 5
