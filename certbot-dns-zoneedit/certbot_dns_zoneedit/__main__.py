import sys

from certbot_dns_zoneedit.cli import main

sys.exit(main())
