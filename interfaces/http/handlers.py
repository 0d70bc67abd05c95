from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from application.services import DEFAULT_IDENTITY_TTL_SECONDS, get_player_stats
from domain.errors import (
    MalformedIdentifier,
    ProviderDecodeError,
    ProviderUnavailable,
    StatsNotFound,
    StorageUnavailable,
)
from domain.models import PlayerStats
from domain.repositories import IdentityCache, IdentityProvider, StatsRepository

logger = logging.getLogger(__name__)


def _stats_to_json(stats: PlayerStats) -> dict:
    return {
        "Uuid": stats.uuid,
        "Username": stats.username,
        "Kills": stats.kills,
        "Deaths": stats.deaths,
        "Coins": stats.coins,
        "Killstreak": stats.killstreak,
    }


def _error(message: str, status: int):
    return jsonify({"error_message": message}), status


def create_http_app(
    identity_cache: IdentityCache,
    identity_provider: IdentityProvider,
    stats_repo: StatsRepository,
    ttl_seconds: int = DEFAULT_IDENTITY_TTL_SECONDS,
) -> Flask:
    """
    Configure and return a Flask app exposing `/stats`.

    This module contains only HTTP concerns: reading the query string,
    mapping application errors to status codes, and shaping JSON. Every
    failure is turned into a response for the request that caused it.
    """

    app = Flask(__name__)

    @app.after_request
    def allow_any_origin(response):
        if request.method == "GET":
            response.headers["Access-Control-Allow-Origin"] = "*"
        return response

    @app.route("/stats", methods=["GET"])
    def get_stats():
        # A missing parameter is looked up as the empty name, like any other.
        username = request.args.get("username", "")

        try:
            stats = get_player_stats(
                username,
                identity_cache,
                identity_provider,
                stats_repo,
                ttl_seconds,
            )
        except StatsNotFound as exc:
            return _error(exc.message, 404)
        except MalformedIdentifier as exc:
            logger.warning("Rejecting lookup for %r: %s", username, exc)
            return _error("Player identifier is malformed.", 400)
        except ProviderDecodeError as exc:
            logger.error("Identity provider response for %r was unreadable: %s", username, exc)
            return _error("Player lookup service returned an invalid response.", 502)
        except ProviderUnavailable as exc:
            logger.error("Identity provider unavailable for %r: %s", username, exc)
            return _error("Player lookup service is unavailable, try again later.", 503)
        except StorageUnavailable as exc:
            logger.error("Stats store unavailable for %r: %s", username, exc)
            return _error("Stats are temporarily unavailable.", 500)

        return jsonify(_stats_to_json(stats))

    @app.route("/stats", methods=["POST", "DELETE"])
    def modify_stats():
        # Stats are written by the game servers, not through this API.
        return _error("Not implemented.", 501)

    return app
