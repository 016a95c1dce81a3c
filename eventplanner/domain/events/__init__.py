"""Events Domain - hosts publish events; public ones are joinable and listed by category"""
