# Routes package init
"""
Orders API — HTTP Routes
=========================

Route Inventory:
    - orders.py:  POST /api/v1/orders               (create)
                  GET  /api/v1/orders/{orderId}     (fetch one)
                  PUT  /api/v1/orders/{orderId}     (replace)
                  GET  /api/v1/orders               (page/sort/filter)
    - health.py:  GET  /health                      (liveness + database probe)

Routes stay thin: pull parameters out of the request, call the injected
OrderService, choose the status code.
"""
