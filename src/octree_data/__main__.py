import sys

from src.octree_data.cli import main

sys.exit(main())
