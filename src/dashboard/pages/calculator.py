"""EMI calculator page: loan inputs, prepayment rules, comparison charts."""

import dash
from dash import html, dcc, callback, Input, Output, State, no_update
from pydantic import ValidationError

from src.api.schemas import EMICalculationRequest, ExtraPaymentRequest
from src.config import settings
from src.dashboard.figures import build_figures
from src.engine.calculation import run_calculation
from src.models.loan import EMIResult, EntryType

dash.register_page(__name__, path="/", name="Calculator")

EXTRA_ROWS = 3

BTN_STYLE = {
    "padding": "0.75rem 2rem",
    "fontSize": "1rem",
    "backgroundColor": "#1a1a2e",
    "color": "white",
    "border": "none",
    "cursor": "pointer",
}

FIELD_STYLE = {"width": "100%", "padding": "0.5rem", "fontSize": "0.95rem"}

# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------


def _field(label, component):
    return html.Div([
        html.Label(label, style={"fontSize": "0.85rem", "marginBottom": "0.25rem", "display": "block"}),
        component,
    ], style={"flex": "1", "minWidth": "140px"})


def _extra_row(i):
    return html.Div([
        _field(f"Extra #{i + 1} Month", dcc.Input(id=f"extra-month-{i}", type="number", min=1, style=FIELD_STYLE)),
        _field("Amount", dcc.Input(id=f"extra-amount-{i}", type="number", min=0, style=FIELD_STYLE)),
        _field("Impact", dcc.Dropdown(
            id=f"extra-impact-{i}",
            options=[
                {"label": "Reduce EMI", "value": "reduce_emi"},
                {"label": "Reduce Tenure", "value": "reduce_tenure"},
            ],
            value="reduce_tenure",
            clearable=False,
        )),
        _field("Recurring", dcc.Checklist(id=f"extra-recurring-{i}", options=[{"label": " Yes", "value": "yes"}], value=[])),
        _field("Every (months)", dcc.Input(id=f"extra-every-{i}", type="number", min=1, style=FIELD_STYLE)),
    ], style={"display": "flex", "gap": "1rem", "marginBottom": "0.75rem"})


layout = html.Div([
    html.H2("EMI Calculator"),

    html.Div([
        _field("Loan Amount", dcc.Input(id="loan-principal", type="number", value=float(settings.default_principal), style=FIELD_STYLE)),
        _field("Annual Interest Rate (%)", dcc.Input(id="loan-rate", type="number", step=0.01, value=float(settings.default_annual_rate), style=FIELD_STYLE)),
        _field("Tenure (months)", dcc.Input(id="loan-tenure", type="number", value=settings.default_tenure_months, style=FIELD_STYLE)),
    ], style={"display": "flex", "gap": "1rem", "marginBottom": "1rem"}),

    html.H4("Extra Payments"),
    *[_extra_row(i) for i in range(EXTRA_ROWS)],

    html.Button("Calculate", id="calculate-btn", n_clicks=0, style=BTN_STYLE),
    html.Div(id="calc-error", style={"color": "#e94560", "marginTop": "1rem"}),

    dcc.Loading(html.Div(id="calc-results", style={"marginTop": "2rem"})),
])


# ---------------------------------------------------------------------------
# Callbacks
# ---------------------------------------------------------------------------


def _extra_states():
    states = []
    for i in range(EXTRA_ROWS):
        states += [
            State(f"extra-month-{i}", "value"),
            State(f"extra-amount-{i}", "value"),
            State(f"extra-impact-{i}", "value"),
            State(f"extra-recurring-{i}", "value"),
            State(f"extra-every-{i}", "value"),
        ]
    return states


@callback(
    [Output("calc-results", "children"), Output("calc-error", "children")],
    Input("calculate-btn", "n_clicks"),
    [State("loan-principal", "value"), State("loan-rate", "value"), State("loan-tenure", "value"), *_extra_states()],
    prevent_initial_call=True,
)
def calculate(n_clicks, principal, rate, tenure, *extra_values):
    extras = []
    for i in range(EXTRA_ROWS):
        month, amount, impact, recurring, every = extra_values[i * 5:(i + 1) * 5]
        if month is None and amount is None:
            continue  # Row left blank
        extras.append(dict(
            month=month,
            amount=amount,
            impact=impact,
            is_recurring=bool(recurring),
            every=every,
        ))

    try:
        req = EMICalculationRequest(
            principal=principal,
            annual_rate=rate,
            tenure_months=tenure,
            extra_payments=[ExtraPaymentRequest(**e) for e in extras],
        )
    except ValidationError as e:
        return no_update, "; ".join(err["msg"] for err in e.errors())

    outcome = run_calculation(req.to_loan_terms())
    if outcome is None:
        return html.Div(), "Calculation failed. Check the inputs and try again."

    return _build_results(outcome), ""


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


def _summary_card(label, result: EMIResult):
    rows = [
        ("EMI", f"{result.emi:,.2f}"),
        ("Total Interest", f"{result.total_interest:,.2f}"),
        ("Total Payment", f"{result.total_payment:,.2f}"),
        ("Tenure", f"{result.emi_months} months"),
    ]
    return html.Div([
        html.H4(label),
        html.Table([html.Tr([html.Td(k), html.Td(v)]) for k, v in rows]),
    ], style={"backgroundColor": "#f5f5f5", "padding": "1rem", "borderRadius": "8px", "flex": "1"})


def _schedule_table(title, result: EMIResult):
    header = html.Tr([html.Th(h) for h in ["Month", "Principal", "Interest", "Total Payment", "Balance"]])
    body = [
        html.Tr([
            html.Td(e.month),
            html.Td(f"{e.principal_component:,.2f}"),
            html.Td(f"{e.interest_component:,.2f}"),
            html.Td(f"{e.total_payment:,.2f}"),
            html.Td(f"{e.balance:,.2f}"),
        ], style={"backgroundColor": "#e8f8f0", "fontWeight": "bold"} if e.type is EntryType.EXTRA else None)
        for e in result.schedule
    ]
    return html.Div([
        html.H4(title),
        html.Div(html.Table([header, *body], style={"width": "100%"}),
                 style={"maxHeight": "400px", "overflowY": "auto"}),
    ], style={"flex": "1"})


def _build_results(outcome):
    comparison = outcome.comparison
    figures = build_figures(outcome.chart_data)

    cards = [_summary_card("Without Extra Payments", comparison.without_extra)]
    if outcome.is_comparison:
        cards.append(_summary_card("With Extra Payments", comparison.with_extra))

    savings = None
    if outcome.is_comparison:
        savings = html.P(
            f"Interest saved: {comparison.interest_saved:,.0f} · "
            f"Tenure shortened by {comparison.months_saved} months",
            style={"fontWeight": "bold"},
        )

    tables = [_schedule_table("Schedule (without extra)", comparison.without_extra)]
    if outcome.is_comparison:
        tables.append(_schedule_table("Schedule (with extra)", comparison.with_extra))

    return html.Div([
        html.Div(cards, style={"display": "flex", "gap": "1rem", "marginBottom": "1rem"}),
        savings,
        dcc.Graph(figure=figures["cumulative"]),
        dcc.Graph(figure=figures["balance"]),
        dcc.Graph(figure=figures["payment_split"]),
        dcc.Graph(figure=figures["outflow"]),
        dcc.Graph(figure=figures["donut"]),
        html.Div(tables, style={"display": "flex", "gap": "1rem"}),
    ])
