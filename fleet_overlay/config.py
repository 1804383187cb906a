# ---- Localization ----
UPDATE_RATE_HZ = 1.0            # max localizer ticks per second
MARKER_HEIGHT = 0.3             # marker centre above the floor (m)
DISTANCE_THRESHOLD = 0.2        # planar drift tolerated before counting (m)
ANGULAR_THRESHOLD_DEG = 10.0    # heading drift tolerated before counting
RELOCALIZATION_THRESHOLD = 5    # consecutive bad readings before re-aligning
MOVING_MODE_TOKEN = "Moving"    # robots whose mode contains this are skipped

# Device tracking frames are y-up (camera sessions); the fleet world is z-up.
LOCAL_UP = (0.0, 1.0, 0.0)
HEADING_EPS = 1e-4

# ---- Trajectory server ----
TRAJECTORY_DURATION_MS = 60000
TRAJECTORY_TRIM = True

# ---- Trajectory visuals ----
TRAJ_Z_OFFSET = 0.8
TRAJ_PATH_SIZE = 0.05
TRAJ_HEIGHT_LEVEL_STEP = 0.1

# ---- UI cadence ----
OVERLAY_WS_HZ = 5.0
EVENT_QUEUE_MAX = 100
