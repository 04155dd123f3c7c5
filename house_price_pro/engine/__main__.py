import sys

from house_price_pro.engine.cli import main

sys.exit(main())
