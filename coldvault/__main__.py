# -*- coding: utf-8 -*-
"""
coldvault/__main__.py

    python -m coldvault run <upload|purge|inventory|delete|restore>
    python -m coldvault serve
"""

import sys

from coldvault.main import main

if __name__ == "__main__":
    sys.exit(main())
