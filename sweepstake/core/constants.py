"""Global constants for the sweepstake application."""

FIRESTORE_BATCH_LIMIT = 400

# Collection names
COMPETITIONS_COLLECTION = "competitions"
MATCHES_COLLECTION = "matches"
TEAMS_COLLECTION = "teams"
SUBMISSIONS_COLLECTION = "submissions"
RESULTS_COLLECTION = "results"

# Fields on 'competitions/{id}'
COMPETITION_NAME = "name"
COMPETITION_DEADLINE = "deadline"

# Fields on 'competitions/{id}/teams/{teamId}'
TEAM_NAME = "teamName"
TEAM_HAS_SUBMITTED = "hasSubmitted"

# Fields on 'competitions/{id}/matches/{matchId}'
MATCH_SIDE_A = "sideA"
MATCH_SIDE_B = "sideB"
MATCH_ORDER = "order"

# Fields on 'competitions/{id}/results/{matchId}'
RESULT_WINNER = "winner"

# Fields on 'competitions/{id}/submissions/{teamId}'
SUBMISSION_TEAM_ID = "teamId"
SUBMISSION_TEAM_NAME = "teamName"
SUBMISSION_COMPETITION = "competition"
SUBMISSION_TIME = "timeSubmitted"
SUBMISSION_PREDICTIONS = "predictions"

# Fields of a stored pick
PICK_MATCH_ID = "matchId"
PICK_SIDE_A = "sideA"
PICK_SIDE_B = "sideB"
PICK_WINNER = "winner"

# Pick fields written by the first mobile client
LEGACY_PICK_MATCH_ID = "id"
LEGACY_PICK_SIDE_A = "teamA"
LEGACY_PICK_SIDE_B = "teamB"

# Device storage keys, namespaced per competition
STORAGE_TEAM_KEY = "teamName"
STORAGE_DRAFT_KEY = "predictions"
STORAGE_LOCKED_KEY = "lockedPredictions"

# Admin
ADMIN_KEY_HEADER = "X-Admin-Key"
DEMO_TEAM_COUNT = 8
