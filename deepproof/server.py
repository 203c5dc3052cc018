"""Flask API: /transcribe, /analyze and /translate in front of the Groq APIs."""

import tempfile
from pathlib import Path

from flask import Flask, request, jsonify
from flask_cors import CORS
from werkzeug.exceptions import RequestEntityTooLarge
from werkzeug.utils import secure_filename

from deepproof.analyzer import analyze_transcript
from deepproof.config import Config
from deepproof.errors import MalformedResponseError, ValidationError
from deepproof.models import AnalysisRequest, TranscriptSegment
from deepproof.transcriber import transcribe_file
from deepproof.translator import translate_segments

app = Flask(__name__)
CORS(app)
app.config['MAX_CONTENT_LENGTH'] = Config.MAX_UPLOAD_MB * 1024 * 1024


@app.errorhandler(RequestEntityTooLarge)
def file_too_large(e):
    return jsonify({'error': f"File too large (limit: {Config.MAX_UPLOAD_MB} MB)"}), 413


@app.route('/health')
def health():
    return jsonify({'status': 'ok'})


@app.route('/transcribe', methods=['POST'])
def transcribe():
    file = request.files.get('file')
    if file is None:
        return jsonify({'error': 'No file provided'}), 400

    file_name = secure_filename(file.filename or "") or "video.mp4"
    with tempfile.TemporaryDirectory(prefix="deepproof_") as temp_dir:
        filepath = Path(temp_dir) / file_name
        try:
            file.save(filepath)
            result = transcribe_file(filepath, file_name=file_name)
        except ValidationError as e:
            return jsonify({'error': e.message}), e.status_code
        except Exception as e:
            print(f"Transcription API error: {e}")
            return jsonify({'error': 'Transcription failed. Check your GROQ_API_KEY.'}), 500

    return jsonify(result.to_dict())


@app.route('/analyze', methods=['POST'])
def analyze():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    try:
        analysis = analyze_transcript(AnalysisRequest.from_dict(data))
    except ValidationError as e:
        return jsonify({'error': e.message}), 400
    except MalformedResponseError as e:
        print(f"Analysis API error: {e}")
        return jsonify({'error': e.message}), 502
    except Exception as e:
        print(f"Analysis API error: {e}")
        return jsonify({'error': 'Analysis failed. Check your GROQ_API_KEY.'}), 500

    return jsonify(analysis.to_dict())


@app.route('/translate', methods=['POST'])
def translate():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    raw_segments = data.get('segments')
    if not isinstance(raw_segments, list):
        raw_segments = []

    try:
        segments = [TranscriptSegment.from_dict(s) for s in raw_segments if isinstance(s, dict)]
        translated = translate_segments(segments, data.get('sourceLanguage') or "unknown")
    except ValidationError as e:
        return jsonify({'error': e.message}), 400
    except MalformedResponseError as e:
        print(f"Translation API error: {e}")
        return jsonify({'error': e.message}), 502
    except Exception as e:
        print(f"Translation API error: {e}")
        return jsonify({'error': 'Translation failed'}), 500

    return jsonify({'segments': [segment.to_dict() for segment in translated]})


def main():
    """Run the development server."""
    app.run(host=Config.HOST, port=Config.PORT, debug=False)


if __name__ == '__main__':
    main()
