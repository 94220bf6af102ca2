"""Module holding constants used across octarchive."""

import os

DEFAULT_API = "https://api.github.com/"
FORGE_API_ACCEPT = "application/json"
USER_AGENT = "octarchive/0.1"
DEFAULT_DST = os.path.join("~", ".local", "share", "octarchive", "var", "lib", "octarchive", "data")
PER_PAGE = 100
HTTP_TIMEOUT_SEC = 30

# git prints the first one (exit 0), go-git style transports the second
EMPTY_REPOSITORY_MARKERS = (
    "You appear to have cloned an empty repository",
    "remote repository is empty",
)
