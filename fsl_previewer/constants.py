"""All magic numbers and configuration constants."""

MS_PER_WORD = 300                   # ms of speech per word when estimating text duration
MIN_DURATION_MS = 500               # floor for any text event
PAUSE_DURATION_MS = 800             # default duration of an explicit [...] beat
SPEAKER_GAP_MS = 200                # gap inserted when the speaker changes
STATE_CHANGE_GAP_MS = 100           # gap when the same speaker changes state
LOCATION_DURATION_MS = 0            # time a location change holds the screen
ENERGY_WINDOW_MS = 100              # RMS analysis window
ENERGY_THRESHOLD = 0.01             # RMS below this = safe cut point
ENERGY_SEARCH_RANGE = 0.2           # seconds to look ahead/behind for a cut point
MIN_AUDIO_DURATION = 0.1            # seconds, shortest clip slice ever played
AUDIO_FADE_MS = 15                  # micro-fade at both ends of a rendered clip
OUTPUT_BITRATE = "192k"             # MP3 output bitrate for rendered previews
DEFAULT_SEED = 12345                # used when the script declares no seed
DEFAULT_STATE = "neutral"           # sticky state of a character not yet seen
AUDIO_EXTENSIONS = (".wav", ".mp3", ".ogg")
VIDEO_EXTENSIONS = (".webm", ".mp4")
ASSETS_DIR = "assets"
OUTPUT_DIR = "output"
VERSION = "0.1.0"
