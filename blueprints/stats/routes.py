"""
Statistics routes.

Household-wide by default; ``?scope=mine`` limits every view to the
caller's own transactions.
"""
from flask import jsonify, request
from flask_login import current_user

from . import stats_bp
from services.stats_service import StatsService
from utils.request_data import query_year_month


def _mine_only():
    return request.args.get('scope') == 'mine'


@stats_bp.route('/heatmap', methods=['GET'])
def heatmap():
    year, month = query_year_month()
    return jsonify(StatsService.heatmap(current_user, year, month, mine_only=_mine_only()))


@stats_bp.route('/inflation', methods=['GET'])
def inflation():
    return jsonify(StatsService.inflation(current_user, mine_only=_mine_only()))


@stats_bp.route('/pie', methods=['GET'])
def pie():
    year, month = query_year_month()
    return jsonify(StatsService.pie(current_user, year, month, mine_only=_mine_only()))


@stats_bp.route('/averages', methods=['GET'])
def averages():
    return jsonify(StatsService.averages(current_user, mine_only=_mine_only()))
