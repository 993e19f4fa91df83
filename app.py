import os

from flask import Flask, jsonify, request
from compiler import CompilationError, CompilerUnavailableError, compile_miru
from miru_examples import get_example, list_examples
from miru_engine import analyze_generated_c, run_generated_c

app = Flask(__name__)


def _compile_or_error(code: str):
    """Return (generated, None) or (None, (response, status))."""
    try:
        return compile_miru(code), None
    except CompilationError as exc:
        return None, (jsonify({"ok": False, "error": str(exc)}), 400)
    except CompilerUnavailableError as exc:
        detail = str(exc) or "Compiler unavailable"
        print(f"[MIRU DEBUG] CompilerUnavailableError: {detail}", flush=True)
        return None, (jsonify({"ok": False, "error": detail}), 503)
    except Exception as exc:  # noqa: BLE001
        print(f"[MIRU DEBUG] Unexpected error: {type(exc).__name__}: {exc}", flush=True)
        import traceback

        print(traceback.format_exc(), flush=True)
        return None, (jsonify({"ok": False, "error": "Compiler unavailable", "detail": str(exc)}), 503)


@app.route("/run", methods=["POST"])
def run_code():
    payload = request.get_json(force=True, silent=True) or {}
    generated = payload.get("c")
    if generated is None:
        code = payload.get("code") or ""
        if not isinstance(code, str) or not code.strip():
            return jsonify({"ok": False, "error": "No code provided."}), 400
        generated, failure = _compile_or_error(code)
        if failure:
            return failure
    elif not isinstance(generated, str):
        return jsonify({"ok": False, "error": "Generated code must be text."}), 400

    placeholder = os.environ.get("MIRU_UNRESOLVED_PLACEHOLDER") or None
    result = run_generated_c(generated, placeholder)
    status = 200 if result.get("ok") else 400
    return jsonify(result), status


@app.route("/compile", methods=["POST"])
def compile_code():
    payload = request.get_json(force=True, silent=True) or {}
    code = payload.get("code") or ""
    if not isinstance(code, str) or not code.strip():
        return jsonify({"ok": False, "error": "No code provided."}), 400

    generated, failure = _compile_or_error(code)
    if failure:
        return failure
    return jsonify({"ok": True, "generated": generated}), 200


@app.route("/analyze", methods=["POST"])
def analyze_code():
    payload = request.get_json(force=True, silent=True) or {}
    generated = payload.get("c") or ""
    if not isinstance(generated, str):
        return jsonify({"ok": False, "error": "Generated code must be text."}), 400
    analysis = analyze_generated_c(generated)
    status = 200 if analysis.get("ok") else 400
    return jsonify(analysis), status


@app.route("/examples")
def examples_index():
    return jsonify({"ok": True, "examples": list_examples()})


@app.route("/examples/<example_id>")
def example_detail(example_id):
    try:
        example = get_example(example_id)
    except KeyError:
        return jsonify({"ok": False, "error": "Unknown example"}), 404
    return jsonify({"ok": True, "example": example})


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, debug=True, use_reloader=False)
