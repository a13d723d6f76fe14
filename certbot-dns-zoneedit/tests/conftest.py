import pytest

from certbot_dns_zoneedit.config import Credentials


@pytest.fixture
def credentials():
    return Credentials('someone', 's3cret', 'static-token')
