import os

from flask import Flask, jsonify, request
from unientropy.config import load_config
from unientropy.evaluator import Estimator

app = Flask(__name__)

# one estimator per app; its settings are not shared with the module-level API
estimator = Estimator(settings=load_config(os.getenv("UNIENTROPY_CONFIG")))


def _body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}

@app.route('/')
def home():
    return jsonify({
        "message": "unientropy API is running"
    })

@app.route('/score', methods=['POST'])
def score_route():
    result = estimator.estimate(_body().get('password', ''))
    return jsonify(result)

@app.route('/classify', methods=['POST'])
def classify_route():
    return jsonify({'characters': estimator.describe(_body().get('text', ''))})

if __name__ == "__main__":
    app.run(debug=True)
