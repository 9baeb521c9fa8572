# Payment API services
