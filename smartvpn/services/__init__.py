# Service layer for the Smart VPN console
# - vpn_client:     HTTP/JSON client for the VPN management backend
# - status_poller:  per-screen periodic polling with stale-response guard
# - actions:        connect/disconnect followed by a forced re-poll
