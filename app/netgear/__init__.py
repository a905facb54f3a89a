"""Scrape + parse support for the Netgear "Statistics" status page (RST_stattbl.htm).

Only tested against the table layout served by consumer Nighthawk firmware.
Older/newer firmware that renders the table differently will likely produce no rows at all,
which is treated as an empty (not failed) poll.
"""
