"""
Health check HTTP server for Kubernetes liveness and readiness checks.

Provides endpoints for monitoring the health and readiness of the GigFlow
engine: database reachability, stored events, offline backlog and
contractor suspensions.
"""

import sqlite3
from pathlib import Path
from typing import Any

from flask import Flask, jsonify

from gigflow.kernel.logging import get_logger

logger = get_logger(__name__)

app = Flask(__name__)

# Global state - will be set by initialize_health_server()
_db_path: Path | None = None
_gigflow_instance: Any = None  # GigFlow instance for detailed checks


def initialize_health_server(db_path: str | Path, gigflow_instance: Any = None) -> None:
    """
    Initialize the health server with a GigFlow instance and database path.

    Args:
        db_path: Path to SQLite database
        gigflow_instance: Optional GigFlow instance for detailed health checks
    """
    global _db_path, _gigflow_instance
    _db_path = Path(db_path)
    _gigflow_instance = gigflow_instance
    logger.info("Health server initialized", db_path=str(_db_path))


def _not_ready(reason: str, **details: Any) -> tuple[Any, int]:
    return jsonify({"status": "not_ready", "reason": reason, **details}), 503


@app.route("/health/live", methods=["GET"])
def liveness() -> tuple[Any, int]:
    """
    Liveness check - checks if the process is running.

    Returns:
        JSON response with status and 200 OK
    """
    return jsonify({"status": "alive", "service": "gigflow"}), 200


@app.route("/health/ready", methods=["GET"])
def readiness() -> tuple[Any, int]:
    """
    Readiness check - checks if the service can serve workflow requests.

    Checks:
    - Database path is configured and the file exists
    - The gig_events table can be queried

    Returns:
        JSON response with status and 200 OK if ready, 503 if not ready
    """
    if _db_path is None:
        logger.error("Readiness check failed: DB path not initialized")
        return _not_ready("database_path_not_initialized")

    if not _db_path.exists():
        logger.error("Readiness check failed: DB file does not exist", db_path=str(_db_path))
        return _not_ready("database_file_not_found", db_path=str(_db_path))

    try:
        conn = sqlite3.connect(str(_db_path), timeout=1.0)
        try:
            event_count = conn.execute("SELECT COUNT(*) FROM gig_events").fetchone()[0]
        finally:
            conn.close()
    except sqlite3.Error as e:
        logger.error("Readiness check failed: DB operational error", error=str(e))
        return _not_ready("database_operational_error", error=str(e))

    logger.debug("Readiness check passed", event_count=event_count)
    return (
        jsonify({"status": "ready", "database": "accessible", "event_count": event_count}),
        200,
    )


@app.route("/health", methods=["GET"])
def detailed_health() -> tuple[Any, int]:
    """
    Detailed health check - includes workflow figures if available.

    Returns:
        JSON response with detailed health information
    """
    health_data: dict[str, Any] = {
        "status": "healthy",
        "service": "gigflow",
        "version": "0.1.0",
    }

    # Database health
    if _db_path and _db_path.exists():
        try:
            conn = sqlite3.connect(str(_db_path), timeout=1.0)
            try:
                event_count = conn.execute("SELECT COUNT(*) FROM gig_events").fetchone()[0]
                page_count = conn.execute("PRAGMA page_count").fetchone()[0]
                page_size = conn.execute("PRAGMA page_size").fetchone()[0]
            finally:
                conn.close()

            health_data["database"] = {
                "status": "healthy",
                "path": str(_db_path),
                "event_count": event_count,
                "size_mb": round((page_count * page_size) / (1024 * 1024), 2),
            }
        except sqlite3.Error as e:
            logger.error("Database health check failed", error=str(e))
            health_data["database"] = {"status": "unhealthy", "error": str(e)}
            health_data["status"] = "degraded"
    else:
        health_data["database"] = {"status": "not_initialized"}
        health_data["status"] = "degraded"

    # Workflow figures (if GigFlow instance available)
    if _gigflow_instance is not None:
        try:
            summaries = _gigflow_instance.list_summaries()
            health_data["workflow"] = {
                "online": _gigflow_instance.connectivity.is_online,
                "offline_queue_depth": len(_gigflow_instance.queue),
                "open_discrepancies": sum(s.open_discrepancies for s in summaries),
                "suspended_contractors": len(_gigflow_instance.suspended_contractors()),
            }
        except Exception as e:
            logger.warning("Could not compute workflow health", error=str(e))
            health_data["workflow"] = {"status": "unavailable", "error": str(e)}

    status_code = 200 if health_data["status"] == "healthy" else 503
    return jsonify(health_data), status_code


def run_health_server(port: int = 8080, debug: bool = False) -> None:
    """
    Run the health check server.

    Args:
        port: Port to listen on (default: 8080)
        debug: Enable Flask debug mode (default: False)
    """
    logger.info("Starting health check server", port=port)
    app.run(host="0.0.0.0", port=port, debug=debug)


if __name__ == "__main__":
    # For local use: python -m gigflow.health_server
    initialize_health_server("/tmp/gigflow-test.db")
    run_health_server(port=8080, debug=True)
