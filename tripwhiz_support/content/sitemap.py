"""
Built-in snapshot of the TripWhiz site map.
"""

from __future__ import annotations

from typing import List

from tripwhiz_support.models.schemas import SitePage

DEFAULT_SITE_PAGES: List[SitePage] = [
    SitePage(
        url="/",
        title="TripWhiz - Smart Travel Booking",
        content=(
            "TripWhiz is your AI-powered travel booking companion offering 8 core travel tools: "
            "Hidden Deal Finder for discovering secret airline deals, Budget Airline Tracker for "
            "real-time price comparison, Price Drop Notifier for instant alerts, Error Fare Scanner "
            "for mistake fares, Multi-City Hack Builder for complex routing, Travel VPN Trick for "
            "market-based pricing, Carry-On Only Filter for baggage-free flights, and AI Chat "
            "Assistant for support."
        ),
    ),
    SitePage(
        url="/budget-tracker",
        title="Budget Airline Tracker",
        content=(
            "Track and compare budget airline prices in real-time using live Amadeus flight data. "
            "Search by origin, destination, dates, and budget to find the cheapest flights. "
            "Features price tracking, flight comparison, and booking integration."
        ),
    ),
    SitePage(
        url="/price-drop",
        title="Price Drop Notifier",
        content=(
            "Monitor saved flight routes for price drops with automatic checking every 6 hours. "
            "Receive browser notifications when prices decrease. Connect to Budget Airline Tracker "
            "to track specific routes and get instant alerts."
        ),
    ),
    SitePage(
        url="/carry-on",
        title="Carry-On Only Filter",
        content=(
            "Find flights that include only carry-on baggage with no checked bag fees. Advanced "
            "filtering analyzes baggage allowances to show true carry-on deals. Search by airports, "
            "dates, and see flights with special carry-on badges."
        ),
    ),
    SitePage(
        url="/vpn-trick",
        title="Travel VPN Trick",
        content=(
            "Search flights from different country markets to find better regional pricing. Select "
            "from 12 global VPN server locations including US, UK, Germany, France, Japan, Australia, "
            "Canada, India, Brazil, Singapore, Netherlands, and Switzerland. Compare prices across "
            "different markets."
        ),
    ),
    SitePage(
        url="/hidden-deals",
        title="Hidden Deal Finder",
        content=(
            "Discover secret deals and unpublished fares from airlines. Advanced search techniques "
            "to find hidden pricing not available through standard booking sites."
        ),
    ),
    SitePage(
        url="/error-fare",
        title="Error Fare Scanner",
        content=(
            "Scan for airline pricing mistakes and error fares that offer significant savings. "
            "Monitor for human errors in airline pricing systems."
        ),
    ),
    SitePage(
        url="/multi-city",
        title="Multi-City Hack Builder",
        content=(
            "Build complex multi-city flight routes to save money compared to round-trip tickets. "
            "Advanced routing optimization for multiple destinations."
        ),
    ),
]


__all__ = ["DEFAULT_SITE_PAGES"]
