# Services package init
"""
AboApp Backend — Services Layer
=================================

What:  Business logic between routes (HTTP) and the database.

Service Inventory:
    - SubscriptionService: listing, create, reactivate, delete, cost overview
    - ReminderService: daily renewal reminder pass
    - AuthProvider (abstract) / SupabaseAuthService: email code sign-in
    - EmailProvider (abstract) / ResendEmailService: transactional email
    - costs, icons, money, dates: pure helpers with no I/O
"""
