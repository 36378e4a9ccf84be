from typing import Dict, Any, Tuple

# This file holds the in-memory data stores for the development service.

PRODUCTS: Dict[str, Dict[str, Any]] = {}
# image name -> (content type, bytes)
IMAGES: Dict[str, Tuple[str, bytes]] = {}
