import logging

from .config import settings

# Configuring the logger
logging.basicConfig(
    filename=settings.log_file,
    filemode="a",
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

# Creating an object
logger = logging.getLogger("storefront")

# Setting the threshold of logger
logger.setLevel(settings.log_level.upper())
