"""
HTTP API for the canvas demo.
A Flask app holding one in-memory DemoSession (single user, resets on restart).
"""

import asyncio
import json
import logging

from flask import Flask, jsonify, request
from pydantic import ValidationError

from . import analytics, config
from . import state as transitions
from .analyst_bot import AnalystBot
from .base import FlowError
from .cleaner_bot import CleanerBot
from .data import AB_TEST_DATA, WHAT_IF_DATA
from .forecast_bot import ForecastBot
from .models import LayoutItem
from .schemas import AnalyzeQueryInput, CleanDataInput, ForecastInput, SummarizeThreadInput
from .session import DemoSession, EmptyPromptError, SessionBusyError, SessionError
from .thread_summary_bot import ThreadSummaryBot
from .utils import rows_to_records

logger = logging.getLogger(__name__)

FLOW_CLASSES = {
    'analyst': AnalystBot,
    'cleaner': CleanerBot,
    'forecaster': ForecastBot,
    'summarizer': ThreadSummaryBot,
}


def create_app(session: DemoSession = None, **flows) -> Flask:
    """
    Build the Flask app.

    Args:
        session: The DemoSession to serve; a fresh one by default
        flows: Optional ready-made bots keyed analyst / cleaner / forecaster /
               summarizer. Missing ones are built on first use, which needs
               ANTHROPIC_API_KEY.
    """
    app = Flask(__name__)
    unknown = set(flows) - set(FLOW_CLASSES)
    if unknown:
        raise ValueError(f"Unknown flows: {', '.join(sorted(unknown))}")
    bots = dict(flows)

    def _flow(name):
        if name not in bots:
            bots[name] = FLOW_CLASSES[name]()
        return bots[name]

    if session is None:
        has_analyst = 'analyst' in bots or bool(config.ANTHROPIC_API_KEY)
        session = DemoSession(analyst=(lambda payload: _flow('analyst').analyze(payload)) if has_analyst else None)
    app.config['DEMO_SESSION'] = session

    def _state():
        """Dashboard state plus the derived values every widget needs. Used by all canvas routes."""
        s = session.state
        return {
            **s.model_dump(by_alias=True),
            'active_sheet': s.active_sheet.model_dump(by_alias=True),
            'highlighted_row_ids': analytics.highlighted_row_ids(s.filtered_rows) if s.highlight_high_revenue else [],
            'kpis': analytics.kpis(s.filtered_rows),
            'total': len(s.rows),
            'filtered': len(s.filtered_rows),
        }

    def _chat_state():
        return {
            'messages': [m.model_dump() for m in session.messages],
            'status': session.status.value,
            'step': session.cursor.position,
            'next_prompt': session.next_prompt(),
        }

    def _body():
        return request.get_json(silent=True) or {}

    # --- Data ---

    @app.route('/api/data')
    def get_data():
        return jsonify(rows_to_records(session.state.rows))

    @app.route('/api/state')
    def get_state():
        return jsonify(_state())

    # --- AI flows ---

    @app.route('/api/analyze', methods=['POST'])
    def analyze():
        body = _body()
        try:
            payload = AnalyzeQueryInput.model_validate({
                'query': body.get('query', ''),
                'salesData': body.get('salesData') or json.dumps(rows_to_records(session.state.rows)),
                'history': body.get('history') or [],
            })
        except ValidationError as e:
            return jsonify({'error': f'Invalid request: {e.errors()[0]["msg"]}'}), 400
        try:
            result = _flow('analyst').analyze(payload)
        except FlowError:
            logger.exception("Error in analyze API")
            return jsonify({'error': 'Failed to analyze data.'}), 500
        return jsonify(result.model_dump(by_alias=True))

    @app.route('/api/clean', methods=['POST'])
    def clean():
        body = _body()
        if not body.get('salesData'):
            return jsonify({'error': 'Sales data is required.'}), 400
        try:
            payload = CleanDataInput.model_validate({'salesData': body['salesData']})
        except ValidationError as e:
            return jsonify({'error': f'Invalid sales data: {e.errors()[0]["msg"]}'}), 400
        try:
            result = _flow('cleaner').clean(payload)
        except FlowError:
            logger.exception("Error in clean API")
            return jsonify({'error': 'Failed to clean data.'}), 500
        return jsonify(result.model_dump(by_alias=True))

    @app.route('/api/forecast', methods=['POST'])
    def forecast():
        body = _body()
        try:
            payload = ForecastInput.model_validate({
                'months': body.get('months', 3),
                'salesData': rows_to_records(session.state.rows),
            })
        except ValidationError as e:
            return jsonify({'error': f'Invalid request: {e.errors()[0]["msg"]}'}), 400
        try:
            rows = _flow('forecaster').forecast(payload)
        except FlowError:
            logger.exception("Error in forecast API")
            return jsonify({'error': 'Failed to generate forecast.'}), 500
        return jsonify([r.model_dump() for r in rows])

    @app.route('/api/summarize', methods=['POST'])
    def summarize():
        thread = _body().get('thread')
        if thread is None:
            return jsonify({'error': 'Thread is required.'}), 400
        try:
            payload = SummarizeThreadInput(thread=thread if isinstance(thread, str) else json.dumps(thread))
            result = _flow('summarizer').summarize(payload)
        except FlowError:
            logger.exception("Error in summarize API")
            return jsonify({'error': 'Failed to summarize thread.'}), 500
        return jsonify(result.model_dump())

    # --- Chat ---

    @app.route('/api/chat')
    def get_chat():
        return jsonify(_chat_state())

    @app.route('/api/chat', methods=['POST'])
    def chat():
        message = _body().get('message')
        try:
            if message is None:
                reply = asyncio.run(session.submit_next())
            else:
                reply = asyncio.run(session.submit(message))
        except EmptyPromptError:
            return jsonify({'error': 'No message provided'}), 400
        except SessionBusyError as e:
            return jsonify({'error': str(e)}), 409
        except SessionError as e:
            return jsonify({'error': str(e)}), 400
        return jsonify({**reply.model_dump(), **_chat_state(), 'state': _state()})

    @app.route('/api/chat/reset', methods=['POST'])
    def reset_chat():
        session.reset()
        return jsonify({**_chat_state(), 'state': _state()})

    # --- Sheets and layout ---

    def _apply(transition, *args):
        session.state = transition(session.state, *args)
        return jsonify(_state())

    @app.route('/api/sheet/add', methods=['POST'])
    def add_sheet():
        return _apply(transitions.add_sheet)

    @app.route('/api/sheet/remove', methods=['POST'])
    def remove_sheet():
        return _apply(transitions.remove_sheet, _body().get('sheet_id'))

    @app.route('/api/sheet/rename', methods=['POST'])
    def rename_sheet():
        body = _body()
        return _apply(transitions.rename_sheet, body.get('sheet_id'), body.get('name', ''))

    @app.route('/api/sheet/activate', methods=['POST'])
    def activate_sheet():
        return _apply(transitions.set_active_sheet, _body().get('sheet_id'))

    @app.route('/api/layout', methods=['POST'])
    def update_layout():
        try:
            layout = [LayoutItem.model_validate(item) for item in _body().get('layout', [])]
        except ValidationError as e:
            return jsonify({'error': f'Invalid layout: {e.errors()[0]["msg"]}'}), 400
        return _apply(transitions.update_layout, layout)

    @app.route('/api/artifact/rename', methods=['POST'])
    def rename_artifact():
        body = _body()
        return _apply(transitions.rename_artifact, body.get('key'), body.get('name', ''))

    # --- Rows and filters ---

    @app.route('/api/row/add', methods=['POST'])
    def add_row():
        return _apply(transitions.add_row)

    @app.route('/api/row/delete', methods=['POST'])
    def delete_row():
        return _apply(transitions.delete_row, _body().get('row_id'))

    @app.route('/api/filter/clear', methods=['POST'])
    def clear_filters():
        return _apply(transitions.clear_filters)

    # --- Widgets ---

    @app.route('/api/pivot')
    def pivot():
        # the pivot summarizes the full dataset; filters only narrow the chart and KPIs
        return jsonify(analytics.pivot_revenue(session.state.rows))

    @app.route('/api/chart')
    def chart():
        versions = analytics.chart_versions(session.state)
        versions['figure'] = json.loads(analytics.revenue_chart_figure(versions['current'], versions['previous']))
        return jsonify(versions)

    @app.route('/api/kpis')
    def kpis():
        return jsonify(analytics.kpis(session.state.filtered_rows))

    @app.route('/api/abtest')
    def abtest():
        return jsonify(analytics.ab_test_report(AB_TEST_DATA))

    @app.route('/api/whatif')
    def whatif():
        return jsonify({
            'scenarios': [s.model_dump() for s in WHAT_IF_DATA],
            'figure': json.loads(analytics.what_if_figure(WHAT_IF_DATA)),
        })

    # --- History panel ---

    @app.route('/api/activities')
    def activities():
        return jsonify([a.model_dump(by_alias=True) for a in session.state.activities])

    @app.route('/api/comment/add', methods=['POST'])
    def add_comment():
        body = _body()
        if not (body.get('text') or '').strip():
            return jsonify({'error': 'No comment provided'}), 400
        return _apply(transitions.add_comment, body.get('artifact_name'), body['text'])

    @app.route('/api/comment/resolve', methods=['POST'])
    def resolve_comment():
        return _apply(transitions.resolve_comment, _body().get('activity_id'))

    @app.route('/api/comment/scrap', methods=['POST'])
    def scrap_comment():
        return _apply(transitions.scrap_comment, _body().get('activity_id'))

    return app
