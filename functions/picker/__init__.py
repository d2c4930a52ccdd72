"""
Admin backend for the restaurant picker.

The whole dataset is one JSON file committed to a GitHub repository. This
package exposes a FastAPI application that reads that file, applies a single
change and commits it back, using the file's blob SHA to detect concurrent
edits.
"""
