"""Constants for jobstore."""

# Logical directory name -> directory relative to the base directory
DEFAULT_DIRECTORIES = {
    "jobs": "jobs",
    "results": "jobs-results",
    "metadata": "jobs-metadata",
    "store": "jobs-store",
    "execution": "jobs-execution",
}

# Date segment used by the job-system path layout
DATE_FORMAT = "%Y-%m-%d"

# Prefix for in-flight writes (skipped by listings)
TEMP_PREFIX = ".jobstore-tmp-"

# Configuration
CONFIG_FILE = "jobstore.yaml"
ENV_BASE_DIR = "JOBSTORE_BASE_DIR"
ENV_BOOTSTRAP = "JOBSTORE_BOOTSTRAP"

# Version
STORE_VERSION = "0.1.0"
