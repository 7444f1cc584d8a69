import sys
import os
from flask import Flask
from flask_cors import CORS

# Add resolver directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), 'resolver')))

from tripsort.config import config

# Import Blueprints
from splitting import splitting_bp

# Initialize Flask App
app = Flask(__name__)
CORS(app)

# Register Blueprints
app.register_blueprint(splitting_bp)

if __name__ == '__main__':
    api_config = config.get_api_config()
    print(f"\n🚌 tripsort backend running at: http://{api_config['host']}:{api_config['port']}\n")
    app.run(**api_config)
