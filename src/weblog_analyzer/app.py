# app.py - HTTP front end for the log analyzer
import logging
import os

from flask import Flask, jsonify

from .analyzer import LOG_PATH, LogAnalyzer
from .collector import LogfileReader, MongoRecordSource
from .errors import LogAnalyzerError

logger = logging.getLogger(__name__)

# file: read LOG_PATH directly; mongo: read the collection filled by the collector
LOG_SOURCE = os.getenv('LOG_SOURCE', 'file')

app = Flask(__name__)


def make_reader():
    """Build the record source selected by LOG_SOURCE"""
    if LOG_SOURCE == 'mongo':
        return MongoRecordSource()
    return LogfileReader(LOG_PATH)


def run_analysis():
    """Fresh analyzer with all three passes done"""
    analyzer = LogAnalyzer(make_reader())
    analyzer.analyze_all_data()
    return analyzer


@app.route('/api/stats')
def api_stats():
    """All access statistics for the configured log"""
    try:
        analyzer = run_analysis()
    except LogAnalyzerError as e:
        logger.error('Analysis failed: %s', e)
        return jsonify({
            'error': 'Failed to analyze log',
            'message': str(e)
        }), 500
    return jsonify(analyzer.summary())


@app.route('/api/counts/<dimension>')
def api_counts(dimension):
    """Per-bucket counts as [label, count] pairs"""
    if dimension not in ('hourly', 'daily', 'monthly'):
        return jsonify({
            'error': 'Unknown dimension',
            'message': f'{dimension} is not one of hourly, daily, monthly'
        }), 404
    try:
        analyzer = run_analysis()
    except LogAnalyzerError as e:
        logger.error('Analysis failed: %s', e)
        return jsonify({
            'error': 'Failed to analyze log',
            'message': str(e)
        }), 500

    if dimension == 'hourly':
        # hours start at 0, days and months at 1
        items = list(enumerate(analyzer.hourly_counts()))
    elif dimension == 'daily':
        items = list(enumerate(analyzer.daily_counts(), 1))
    else:
        items = list(enumerate(analyzer.monthly_counts(), 1))
    return jsonify([[label, count] for label, count in items])


if __name__ == '__main__':
    logging.basicConfig(
        level=os.getenv('LOG_LEVEL', 'INFO'),
        format='[%(asctime)s] [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    app.run(host='0.0.0.0', port=5000, debug=True)
