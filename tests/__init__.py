"""
MarkdownOCR - Unit Tests Package

Test Coverage:
- Region selection state machine
- Snapshot capture and cropping
- Image preprocessing (grayscale, contrast curve, PNG, base64)
- Ollama recognizer against a mock backend
- Pipeline ordering and error typing
- Configuration
- Capture overlay and result window (offscreen Qt)

Run tests with:
    pytest -v --cov=src.markdownocr
"""
