from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Limits come from the RATELIMIT_* config keys at init_app time
limiter = Limiter(key_func=get_remote_address)

cors = CORS()
