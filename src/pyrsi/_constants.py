"""Internal constants shared across the library."""

ARCHIVE_BASE_URL = "https://mesonet.agron.iastate.edu/archive/data"
DASHCAM_URL = "https://mesonet.agron.iastate.edu/api/1/idot_dashcam.json"
PREDICTION_BASE_URL = "https://index-xmctotgaqq-uc.a.run.app"
WARMUP_URL = PREDICTION_BASE_URL
MANIFEST_URL = (
    "https://raw.githubusercontent.com/vstfl/mapbox-rsi/main/docs/assets/generatedNIKInterpolations/file-list.json"
)

AVL_ENDPOINT = "/avl"
RWIS_ENDPOINT = ""
AVL_CHUNK_SIZE = 100
RWIS_CHUNK_SIZE = 10

#: RWIS data is queried from ``end - lookback`` so the latest station image
#: is captured even when it falls just outside the nominal window.
RWIS_LOOKBACK_MINUTES = 60

#: Five fast requests spin up two backend containers.
WARMUP_CONTAINERS = 5

IMAGE_PREFIX = "IDOT"
IMAGE_EXTENSION = ".jpg"

#: Fixed ``IDOT-XXX-YY`` station identifier width after truncation.
STATION_KEY_WIDTH = 8

RWIS_STATION_IDS: tuple[str, ...] = (
    "IDOT-000-03",
    "IDOT-001-00",
    "IDOT-008-00",
    "IDOT-010-01",
    "IDOT-025-01",
    "IDOT-025-04",
    "IDOT-030-01",
    "IDOT-036-00",
    "IDOT-036-03",
    "IDOT-040-00",
    "IDOT-047-00",
    "IDOT-047-01",
    "IDOT-047-02",
    "IDOT-047-05",
    "IDOT-047-06",
    "IDOT-051-01",
    "IDOT-051-02",
    "IDOT-053-00",
    "IDOT-053-02",
    "IDOT-056-00",
)
