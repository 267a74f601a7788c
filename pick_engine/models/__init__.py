"""Frozen pydantic records exchanged between the engine and its callers.

Modules
-------
event      : Team + Event (schedule provider's fixture record)
forecast   : ForecastProbabilities + RiskVerdict + Forecast
sentiment  : MarketOutcome + SentimentMarket + SentimentSnapshot
prediction : MarketSelection + Prediction + DailyCandidate
settlement : FinalScore + SettledPick
"""
