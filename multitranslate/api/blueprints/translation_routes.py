"""
Translation routes (aggregate and streaming)
"""
import uuid

from flask import Blueprint, request, jsonify

from multitranslate.core.exceptions import AllProvidersFailedError, InvalidRequestError
from multitranslate.core.models import TranslationRequest
from ..handlers import run_dispatch


def _request_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidRequestError("Request body must be a JSON object")
    return data


def create_translation_blueprint(dispatcher, start_stream_job):
    """
    Create and configure the translation blueprint

    Args:
        dispatcher: TranslationDispatcher instance
        start_stream_job: Callable(request, request_id) starting a streaming dispatch
    """
    bp = Blueprint('translation', __name__)

    @bp.route('/api/translate', methods=['POST'])
    def translate():
        """Translate with every requested provider and return all results"""
        translation_request = TranslationRequest.from_dict(_request_body())

        try:
            response = run_dispatch(dispatcher, translation_request)
        except AllProvidersFailedError as e:
            return jsonify({
                "error": str(e),
                "failures": [{"name": name, "error": error} for name, error in e.failures]
            }), 502

        return jsonify(response.to_dict())

    @bp.route('/api/translate/stream', methods=['POST'])
    def translate_stream():
        """Start a streaming translation; events arrive over Socket.IO"""
        data = _request_body()
        translation_request = TranslationRequest.from_dict(data.get('request'))

        request_id = data.get('request_id') or data.get('requestId')
        if request_id is None:
            request_id = f"stream_{uuid.uuid4().hex}"
        elif not isinstance(request_id, str):
            raise InvalidRequestError("Field 'request_id' must be a string")

        start_stream_job(translation_request, request_id)

        return jsonify({
            "status": "accepted",
            "request_id": request_id
        }), 202

    return bp
