import logging
import os
from datetime import datetime


def setup_logging(level=logging.INFO, log_dir: str = "logs"):
    """Setup basic logging configuration"""
    os.makedirs(log_dir, exist_ok=True)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        handlers=[
            logging.FileHandler(
                os.path.join(
                    log_dir, f"pipeline_{datetime.now().strftime('%Y-%m-%d')}.log"
                )
            ),
            logging.StreamHandler(),
        ],
    )
    # urllib3 logs every connection at DEBUG, including full URLs with api_key
    logging.getLogger("urllib3").setLevel(max(level, logging.INFO))
    return logging.getLogger(__name__)
